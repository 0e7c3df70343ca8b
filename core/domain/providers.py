"""
Provider catalog.

Third-party services the storefront is configured for, the environment
variables each one needs and the endpoint used to check its credentials.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .exceptions import UnknownServiceError


@dataclass(frozen=True)
class Provider:
    """One third-party service used by the storefront."""
    name: str
    title: str
    required_vars: Tuple[str, ...]
    key_markers: Tuple[str, ...]
    check_url: str
    auth_scheme: str = "bearer"
    # statuses that still prove the credentials were accepted
    accepted_statuses: Tuple[int, ...] = ()

    def owns(self, key: str) -> bool:
        lowered = key.lower()
        return any(marker in lowered for marker in self.key_markers)

    def missing_vars(self, configured: Iterable[str]) -> List[str]:
        present = set(configured)
        return [name for name in self.required_vars if name not in present]


PROVIDERS: Tuple[Provider, ...] = (
    Provider(
        name="prokerala",
        title="Prokerala API",
        required_vars=("PROKERALA_API_KEY", "PROKERALA_USER_ID"),
        key_markers=("prokerala",),
        check_url="https://api.prokerala.com/v2/astrology/kundli",
        accepted_statuses=(422,),
    ),
    Provider(
        name="razorpay",
        title="Razorpay",
        required_vars=("RAZORPAY_KEY_ID", "RAZORPAY_KEY_SECRET"),
        key_markers=("razorpay",),
        check_url="https://api.razorpay.com/v1/payments",
        auth_scheme="basic",
    ),
    Provider(
        name="goaffpro",
        title="GoAffPro Affiliate",
        required_vars=("GOAFFPRO_API_KEY", "GOAFFPRO_STORE_ID"),
        key_markers=("goaffpro", "affiliate"),
        check_url="https://api.goaffpro.com/affiliates",
    ),
)


def get_provider(name: str) -> Provider:
    """Look up a provider by name.

    Raises:
        UnknownServiceError: If no provider has that name
    """
    for provider in PROVIDERS:
        if provider.name == name:
            return provider
    raise UnknownServiceError(name)


def detect_provider(key: str) -> Optional[str]:
    """Name of the provider an environment variable belongs to, if any."""
    for provider in PROVIDERS:
        if provider.owns(key):
            return provider.name
    return None
