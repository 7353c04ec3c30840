from django.urls import include, path

urlpatterns = [
    path('', include('kleene.urls')),
]
