"""
==============================================================================
Product Models Module
==============================================================================

Pydantic models for catalog products and incoming product data.

==============================================================================
"""

from typing import Any, ClassVar, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Product(BaseModel):
    """
    Product stored in the catalog file.

    Attributes:
        id: Store-assigned identifier, max(existing) + 1
        title: Display title
        price: Unit price, never negative
        description: Free-text description
        code: Product code, generated as "P<epoch ms>" when not supplied
        stock: Units in stock
        category: Category name
        thumbnails: Image paths or URLs, in display order
    """

    # Unknown keys already in the file survive a rewrite
    model_config = ConfigDict(extra="allow")

    id: int = Field(..., ge=1, description="Product identifier")
    title: str = Field(..., description="Product title")
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Unit price")
    description: str = Field(..., description="Product description")
    code: str = Field(..., description="Product code")
    stock: int = Field(..., description="Units in stock")
    category: str = Field(..., description="Category name")
    thumbnails: List[str] = Field(default_factory=list, description="Thumbnail paths")


class ProductInput(BaseModel):
    """
    Untrusted product data submitted for a durable add.

    Every field is optional at parse time; ``missing_required`` reports which
    required fields are absent so the caller can name all of them at once.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = (
        "title",
        "price",
        "description",
        "stock",
        "category",
    )

    title: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    description: Optional[str] = None
    code: Optional[str] = None
    stock: Optional[int] = None
    category: Optional[str] = None
    thumbnails: Optional[List[str]] = None

    @field_validator("thumbnails", mode="before")
    @classmethod
    def wrap_single_thumbnail(cls, value: Any) -> Any:
        """Accept a single path where a list is expected (form posts)."""
        if isinstance(value, str):
            return [value] if value.strip() else []
        return value

    @field_validator("code", mode="before")
    @classmethod
    def blank_code_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def missing_required(cls, data: Mapping[str, Any]) -> List[str]:
        """
        List required fields that are absent, null or blank in raw data.

        Args:
            data: Raw request body

        Returns:
            Missing field names in declaration order
        """
        missing = []
        for name in cls.REQUIRED_FIELDS:
            value = data.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing


# Fields relayed for a client-originated add over the real-time channel
EPHEMERAL_PRODUCT_FIELDS: Tuple[str, ...] = ProductInput.REQUIRED_FIELDS
