from pydantic_settings import BaseSettings
from pydantic import Field
import os
from dotenv import load_dotenv

from zipmend.models import ProcessingOptions

# Load environment variables
load_dotenv()


class Settings(BaseSettings):
    bot_token: str = Field(default=os.getenv("BOT_TOKEN", ""), alias="BOT_TOKEN")
    default_lang: str = Field(default="ko", alias="DEFAULT_LANG")

    # Uploads above this are rejected before decoding (Telegram bots can't fetch >20MB anyway)
    max_zip_bytes: int = Field(default=50 * 1024 * 1024, alias="MAX_ZIP_BYTES")
    compression_level: int = Field(default=6, alias="COMPRESSION_LEVEL")

    # Candidate legacy encodings, tried in this order
    repair_encodings: str = Field(default="cp949,cp932,gbk", alias="REPAIR_ENCODINGS")

    # How long a diagnosed ZIP stays actionable from the inline keyboard
    pending_ttl: int = Field(default=900, alias="PENDING_TTL")

    # Default processing options
    remove_metadata_artifacts: bool = Field(default=True, alias="REMOVE_METADATA_ARTIFACTS")
    remove_settings_files: bool = Field(default=True, alias="REMOVE_SETTINGS_FILES")
    remove_hidden_files: bool = Field(default=False, alias="REMOVE_HIDDEN_FILES")
    fix_encoding: bool = Field(default=True, alias="FIX_ENCODING")

    @property
    def repair_candidates(self) -> tuple[str, ...]:
        return tuple(e.strip() for e in self.repair_encodings.split(",") if e.strip())

    def default_options(self) -> ProcessingOptions:
        return ProcessingOptions(
            remove_metadata_artifacts=self.remove_metadata_artifacts,
            remove_settings_files=self.remove_settings_files,
            remove_hidden_files=self.remove_hidden_files,
            fix_encoding=self.fix_encoding,
        )

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True


settings = Settings()
