from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ConfigDict


class AliasConfig(BaseModel):
    aliases: List[str] = Field(default_factory=list)


class LocationConfig(BaseModel):
    aliases: List[str] = Field(default_factory=lambda: ["place 1", "place"])
    # Matched by exact normalized header, never fuzzily.
    extra_columns: List[str] = Field(default_factory=lambda: ["place2", "place3"])
    placeholder: str = "Not Specified"


class MediaConfig(BaseModel):
    video_tokens: List[str] = Field(default_factory=lambda: ["video", "movie"])
    photo_url_template: str = "https://lh3.googleusercontent.com/d/{file_id}"
    video_url_template: str = "https://drive.google.com/file/d/{file_id}/preview"


class SentimentConfig(BaseModel):
    positive: List[str] = Field(
        default_factory=lambda: ["good", "great", "success", "done", "completed", "excellent"]
    )
    negative: List[str] = Field(
        default_factory=lambda: ["issue", "problem", "bad", "pending", "stuck", "poor"]
    )


class FormFieldConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")
    date: AliasConfig = Field(default_factory=lambda: AliasConfig(aliases=["date"]))
    name: AliasConfig = Field(
        default_factory=lambda: AliasConfig(aliases=["campaign incharge", "incharge", "name"])
    )
    location: LocationConfig = Field(default_factory=LocationConfig)
    message: AliasConfig = Field(
        default_factory=lambda: AliasConfig(aliases=["any remark", "remark", "message", "comments"])
    )
    staff: AliasConfig = Field(default_factory=lambda: AliasConfig(aliases=["staff involve", "staff"]))
    pamphlets: AliasConfig = Field(default_factory=lambda: AliasConfig(aliases=["total pamplet", "pamplet"]))
    name_placeholder: str = "Unknown Incharge"
    # Headers that never reach extra_fields (the Google Forms submission stamp).
    ignored_headers: List[str] = Field(default_factory=lambda: ["timestamp"])
    # Cell values treated as "not applicable" for the secondary place columns.
    not_applicable_tokens: List[str] = Field(default_factory=lambda: ["na", "n/a"])


class FieldConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")
    form: FormFieldConfig = Field(default_factory=FormFieldConfig)
    media: MediaConfig = Field(default_factory=MediaConfig)
    sentiment: SentimentConfig = Field(default_factory=SentimentConfig)


def load_field_config(path: Optional[Path] = None) -> FieldConfig:
    """
    Load header/alias mapping configuration from YAML with safe defaults.
    Sections missing from the file keep their built-in defaults.
    """
    file_path = path or Path("config/fields.yaml")
    if not file_path.exists():
        return FieldConfig()

    with open(file_path, "r") as f:
        data = yaml.safe_load(f) or {}

    return FieldConfig.model_validate(data)


# Singleton-style loaded config for convenience
field_config = load_field_config()
