# Overview: Store settings (defaults from Flask config, operator overrides, payment profiles).

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping

from ..coerce import as_float, as_int, as_str
from ..validation import ValidationError, coerce_number, coerce_stock

# Payment methods differ between deployments. The method stored on a sale is a
# plain string; the profile only decides what checkout accepts.
PAYMENT_PROFILES: dict[str, tuple[str, ...]] = {
    "standard": ("cash", "card", "digital", "other"),
    "upi": ("cash", "card", "upi"),
}
DEFAULT_PAYMENT_PROFILE = "standard"

SETTINGS_FIELDS = {
    "storeName": "store_name",
    "currency": "currency",
    "taxRateDefault": "tax_rate_default",
    "lowStockThreshold": "low_stock_threshold",
    "supabaseUrl": "supabase_url",
    "supabaseAnonKey": "supabase_anon_key",
    "paymentProfile": "payment_profile",
}


@dataclass
class StoreSettings:
    store_name: str
    currency: str
    tax_rate_default: float = 0.0
    low_stock_threshold: int = 5
    supabase_url: str = ""
    supabase_anon_key: str = ""
    payment_profile: str = DEFAULT_PAYMENT_PROFILE

    @property
    def payment_methods(self) -> tuple[str, ...]:
        return PAYMENT_PROFILES.get(self.payment_profile, PAYMENT_PROFILES[DEFAULT_PAYMENT_PROFILE])

    @property
    def sync_configured(self) -> bool:
        return bool(self.supabase_url.strip() and self.supabase_anon_key.strip())

    def to_dict(self, *, redact: bool = False) -> dict:
        key = self.supabase_anon_key
        if redact and key:
            key = "****" + key[-4:]
        return {
            "storeName": self.store_name,
            "currency": self.currency,
            "taxRateDefault": self.tax_rate_default,
            "lowStockThreshold": self.low_stock_threshold,
            "supabaseUrl": self.supabase_url,
            "supabaseAnonKey": key,
            "paymentProfile": self.payment_profile,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], defaults: "StoreSettings") -> "StoreSettings":
        """Read a stored settings document; missing keys keep ``defaults``."""
        if not isinstance(data, Mapping):
            raise ValueError("settings must be an object")
        values = {}
        for doc_key, attr in SETTINGS_FIELDS.items():
            if doc_key not in data:
                continue
            if attr == "tax_rate_default":
                values[attr] = as_float(data, doc_key)
            elif attr == "low_stock_threshold":
                values[attr] = as_int(data, doc_key)
            else:
                values[attr] = as_str(data, doc_key)
        return replace(defaults, **values)


def default_settings(config: Mapping[str, Any]) -> StoreSettings:
    return StoreSettings(
        store_name=config.get("STORE_NAME", "JOHNY GEAR STORE"),
        currency=config.get("STORE_CURRENCY", "NPR"),
        tax_rate_default=float(config.get("TAX_RATE_DEFAULT", 0) or 0),
        low_stock_threshold=int(config.get("LOW_STOCK_THRESHOLD", 5) or 0),
        supabase_url=config.get("SUPABASE_URL", "") or "",
        supabase_anon_key=config.get("SUPABASE_ANON_KEY", "") or "",
        payment_profile=config.get("PAYMENT_PROFILE", DEFAULT_PAYMENT_PROFILE) or DEFAULT_PAYMENT_PROFILE,
    )


def apply_settings_patch(settings: StoreSettings, patch: Mapping[str, Any]) -> StoreSettings:
    """Validate an operator patch and return the updated settings (input is not mutated)."""
    if not isinstance(patch, Mapping):
        raise ValidationError("Invalid JSON payload")

    unknown = [k for k in patch if k not in SETTINGS_FIELDS]
    if unknown:
        raise ValidationError(f"Field not allowed: {', '.join(sorted(unknown))}")

    values: dict[str, Any] = {}
    if "storeName" in patch:
        name = str(patch["storeName"] or "").strip()
        if not name:
            raise ValidationError("storeName cannot be blank")
        values["store_name"] = name
    if "currency" in patch:
        currency = str(patch["currency"] or "").strip().upper()
        if not currency:
            raise ValidationError("currency cannot be blank")
        values["currency"] = currency
    if "taxRateDefault" in patch:
        values["tax_rate_default"] = coerce_number(patch["taxRateDefault"], "taxRateDefault")
    if "lowStockThreshold" in patch:
        values["low_stock_threshold"] = coerce_stock(patch["lowStockThreshold"], "lowStockThreshold")
    if "supabaseUrl" in patch:
        values["supabase_url"] = str(patch["supabaseUrl"] or "").strip().rstrip("/")
    if "supabaseAnonKey" in patch:
        values["supabase_anon_key"] = str(patch["supabaseAnonKey"] or "").strip()
    if "paymentProfile" in patch:
        profile = str(patch["paymentProfile"] or "").strip().lower()
        if profile not in PAYMENT_PROFILES:
            raise ValidationError(
                f"paymentProfile must be one of: {', '.join(sorted(PAYMENT_PROFILES))}"
            )
        values["payment_profile"] = profile

    return replace(settings, **values)


def normalize_payment_method(value: Any, settings: StoreSettings) -> str:
    """Checkout-time check against the active profile."""
    method = str(value or "").strip().lower()
    if method not in settings.payment_methods:
        raise ValidationError(
            f"Unsupported payment method '{value}'; expected one of: {', '.join(settings.payment_methods)}"
        )
    return method
