"""User display preferences (the 'settings' client-state blob)."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

CURRENCIES: dict[str, str] = {
    "EUR": "Euro (€)",
    "USD": "US Dollar ($)",
    "GBP": "British Pound (£)",
    "JPY": "Japanese Yen (¥)",
}


class Settings(BaseModel):
    """Display preferences; independent of calculation correctness."""

    currency: Literal["EUR", "USD", "GBP", "JPY"] = Field("EUR", description="Currency code for cost figures")
    darkMode: bool = Field(False, description="Dark colour scheme")
    decimalSeparator: Literal[".", ","] = Field(".", description="Character used as decimal separator")


class SettingsUpdate(BaseModel):
    """Partial update; unset fields keep their stored value."""

    currency: Optional[Literal["EUR", "USD", "GBP", "JPY"]] = None
    darkMode: Optional[bool] = None
    decimalSeparator: Optional[Literal[".", ","]] = None
