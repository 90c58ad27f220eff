"""Pydantic models for request parameters and page metadata.

Responses are handed back as the decoded JSON the API sent; the models here
only cover the two places where the client itself must trust a shape:

- Parameter models validate what a caller passes to a resource method,
  so that a bad id fails before any request goes out.
- PageInfo reads the ``meta.<field>`` block that drives pagination.

Example:
    >>> validate_params(ResourceLookup, id=42)
    ResourceLookup(id=42)
    >>> validate_params(ResourceLookup, id="42")  # raises ConfigurationError

"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, PositiveInt
from pydantic import ValidationError as PydanticValidationError

from pingboard_client.exceptions import ConfigurationError


class PingboardModel(BaseModel):
    """Base model for parameter structs.

    Parameters are strict: ``"42"`` is not accepted where an integer id is
    expected, and unknown keyword arguments are rejected.

    """

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        extra="forbid",
    )


M = TypeVar("M", bound=PingboardModel)


class ResourceLookup(PingboardModel):
    """Parameters for fetching a single resource by id."""

    id: PositiveInt


class ResourceQuery(PingboardModel):
    """Parameters for listing a resource.

    Attributes:
        id: Restrict the listing to one resource id.
        size: Stop paginating once at least this many items are collected.

    """

    id: PositiveInt | None = None
    size: PositiveInt | None = None


class PageInfo(BaseModel):
    """Pagination metadata for one field of a page envelope.

    Envelope shape::

        {
            "statuses": [...],
            "meta": {"statuses": {"page": 1, "page_count": 3, ...}}
        }

    """

    model_config = ConfigDict(extra="ignore")

    page: int
    page_count: int

    @property
    def has_next(self) -> bool:
        """Check if the server reports more pages."""
        return self.page < self.page_count


def validate_params(model: type[M], **params: Any) -> M:
    """Build a parameter model, raising ConfigurationError on bad input.

    Args:
        model: Parameter model class.
        **params: Caller-supplied parameters.

    Returns:
        The validated model instance.

    Raises:
        ConfigurationError: If any parameter has the wrong type or value.

    """
    try:
        return model.model_validate(params)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"Invalid parameters for {model.__name__}: {problems}") from e
