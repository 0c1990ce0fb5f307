from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    environment: str = Field(default="development", alias="ENVIRONMENT")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    brand_name: str = Field(default="Augment Leadership Survey", alias="BRAND_NAME")

    # "smtp" relays through SMTP_*; "resend" uses the Resend API
    mail_provider: str = Field(default="smtp", alias="MAIL_PROVIDER")
    admin_email: str | None = Field(default=None, alias="ADMIN_EMAIL")
    attach_pdf_report: bool = Field(default=True, alias="ATTACH_PDF_REPORT")

    smtp_host: str = Field(default="localhost", alias="SMTP_HOST")
    smtp_port: int = Field(default=1025, alias="SMTP_PORT")
    smtp_username: str | None = Field(default=None, alias="SMTP_USERNAME")
    smtp_password: str | None = Field(default=None, alias="SMTP_PASSWORD")
    smtp_use_tls: bool = Field(default=False, alias="SMTP_USE_TLS")
    smtp_from_email: str | None = Field(default=None, alias="SMTP_FROM_EMAIL")
    smtp_from_name: str = Field(default="Augment Leadership Survey", alias="SMTP_FROM_NAME")

    resend_api_key: str | None = Field(default=None, alias="RESEND_API_KEY")

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    def missing_mail_settings(self) -> list[str]:
        """Names of the mail settings a send would need but are unset."""
        missing = []
        if not self.smtp_from_email:
            missing.append("SMTP_FROM_EMAIL")
        if not self.admin_email:
            missing.append("ADMIN_EMAIL")
        provider = self.mail_provider.strip().lower()
        if provider == "resend" and not self.resend_api_key:
            missing.append("RESEND_API_KEY")
        elif provider == "smtp" and not self.smtp_host:
            missing.append("SMTP_HOST")
        return missing


settings = Settings()
