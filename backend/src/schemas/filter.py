"""Pydantic schemas for filter/select options."""
from pydantic import BaseModel


class FilterOption(BaseModel):
    """
    One choice in a filter dropdown.

    Every option has the same shape, so consumers never need to guess whether
    they were handed a bare id or an object.
    """

    value: str
    label: str
