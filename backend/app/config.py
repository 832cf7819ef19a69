from pydantic_settings import BaseSettings

DEFAULT_EMPLOYER_ACCESS_CODE = "employer123"
DEFAULT_PRIVATE_ACCESS_CODE = "private123"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "CareerID Skills Passport"
    app_env: str = "development"
    debug: bool = False

    # Airtable: credentials stay server-side, only the proxy reads them
    airtable_base_id: str = ""
    airtable_pat: str = ""
    airtable_api_url: str = "https://api.airtable.com/v0"

    # Record source for the view controller: "upstream" calls the proxy
    # service in-process, "proxy" POSTs to proxy_url over HTTP.
    record_source: str = "upstream"
    proxy_url: str = "http://localhost:8000/api/airtable"
    request_timeout_seconds: float = 10.0

    # Profile
    person_name: str = "Stephanie Thompson"
    person_link_field: str = "Person"

    # Tables
    people_table: str = "People"
    skills_table: str = "Skills"
    person_skills_table: str = "Person - Skills"
    experiences_table: str = "Experiences"
    achievements_table: str = "Achievements"
    training_table: str = "Training & Learning"

    # Tier access codes: cosmetic deterrent, not an authentication boundary
    employer_access_code: str = DEFAULT_EMPLOYER_ACCESS_CODE
    private_access_code: str = DEFAULT_PRIVATE_ACCESS_CODE

    max_sessions: int = 1000

    # CORS: comma-separated origins (e.g. "https://passport.example.com")
    cors_allow_origins: str = "http://localhost:3000"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def uses_default_access_codes(self) -> bool:
        return (
            self.employer_access_code == DEFAULT_EMPLOYER_ACCESS_CODE
            or self.private_access_code == DEFAULT_PRIVATE_ACCESS_CODE
        )


settings = Settings()
