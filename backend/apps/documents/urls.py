from django.urls import path

from .views import DocumentDetailView, DocumentUploadView

urlpatterns = [
    path('upload/', DocumentUploadView.as_view(), name='document-upload'),
    path('<str:doc_id>/', DocumentDetailView.as_view(), name='document-detail'),
]
