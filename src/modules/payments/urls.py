from django.urls import path

from modules.payments.views import StripeWebhookView, VerifyPaymentView

urlpatterns = [
    path("payments/verify/", VerifyPaymentView.as_view(), name="payment-verify"),
    path("payments/webhook/", StripeWebhookView.as_view(), name="payment-webhook"),
]
