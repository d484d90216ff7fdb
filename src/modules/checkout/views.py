"""Checkout API view.

``POST /api/v1/checkout/`` validates the form, requests a payment session
and answers with the URL the client must open in the top-level window.
"""

from __future__ import annotations

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.cart.storage import SessionCartStore
from modules.checkout.dtos import CheckoutContextDTO
from modules.checkout.exceptions import (
    AuthenticationRequired,
    EmptyCart,
    IncompleteCheckoutFields,
)
from modules.checkout.repositories.django_repository import (
    CheckoutSessionDjangoRepository,
)
from modules.checkout.serializers import CheckoutResultSerializer, CheckoutSerializer
from modules.checkout.services import CheckoutService
from modules.payments.exceptions import PaymentSessionFailed
from modules.payments.gateway import build_payment_gateway


def _redirect_base_url(request: Request) -> str:
    return request.headers.get("Origin") or settings.STOREFRONT_BASE_URL


class CheckoutView(APIView):
    # Anonymous shoppers get a 401 with sign-in links from the service.
    permission_classes = [AllowAny]
    throttle_scope = "checkout"

    def post(self, request: Request) -> Response:
        """POST /api/v1/checkout/"""
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        base_url = _redirect_base_url(request).rstrip("/")
        store = SessionCartStore(request.session)
        service = CheckoutService(
            checkout_repository=CheckoutSessionDjangoRepository(),
            payment_gateway=build_payment_gateway(),
            cart_store=store,
            currency=settings.STRIPE_CURRENCY,
        )

        try:
            result = service.start_checkout(
                user=request.user,
                cart=store.load(),
                context=CheckoutContextDTO(**serializer.validated_data),
                base_url=base_url,
            )
        except AuthenticationRequired as exc:
            return Response(
                {
                    "detail": str(exc),
                    "login_url": f"{base_url}/login",
                    "register_url": f"{base_url}/register",
                },
                status=status.HTTP_401_UNAUTHORIZED,
            )
        except EmptyCart as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except IncompleteCheckoutFields as exc:
            return Response(
                {"detail": str(exc), "missing_fields": exc.missing_fields},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except PaymentSessionFailed as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)

        return Response(
            CheckoutResultSerializer(result.model_dump()).data,
            status=status.HTTP_201_CREATED,
        )
