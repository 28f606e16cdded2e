from datetime import time
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Domain schemas speak camelCase on the wire and accept snake_case too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def check_time_window(start: Optional[time], end: Optional[time]) -> None:
    if start is not None and end is not None and end <= start:
        raise ValueError("endTime must be after startTime")
