"""
Configuration domain models.

Mirrors the layout of config.json. Field aliases are the lowercased JSON keys
because the repository folds key case before validation.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator

DEFAULT_HOST = "127.0.0.1"
DEFAULT_SQL_PORT = 1433


class ActiveDirectorySettings(BaseModel):
    """On-premises directory used as the primary authoritative source."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    enabled: bool = Field(True, description="Query Active Directory for computers")
    host: str = Field(DEFAULT_HOST, description="Domain controller host name or IP")
    domain: str = Field("", description="NetBIOS domain used for the bind user")
    username: str = Field("", description="Bind user name (without domain)")
    password: SecretStr = Field(SecretStr(""), description="Bind password")
    dn: str = Field("", description="Search base distinguished name")

    @property
    def bind_user(self) -> str:
        return f"{self.domain}\\{self.username}"

    @property
    def url(self) -> str:
        return f"ldap://{self.host}:389"


class AzureSettings(BaseModel):
    """Cloud directory used as an optional second authoritative source."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    enabled: bool = Field(False, description="Query Azure AD for registered devices")
    domain: str = Field("", description="UPN suffix appended to the directory user name")
    tenant_id: Optional[str] = Field(None, alias="tenantid", description="Graph tenant for app authentication")
    client_id: Optional[str] = Field(None, alias="clientid", description="Graph application (client) id")
    client_secret: Optional[SecretStr] = Field(None, alias="clientsecret", description="Graph application secret")
    shell: str = Field("powershell", description="Shell executable used for the AzureAD module")

    @property
    def uses_graph(self) -> bool:
        """True when app credentials for the Graph API are configured."""
        return bool(self.tenant_id and self.client_id and self.client_secret)


class DatabaseSettings(BaseModel):
    """Polaris SQL Server database holding the workstation inventory."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    host: str = Field(DEFAULT_HOST, description="SQL Server host")
    port: int = Field(DEFAULT_SQL_PORT, description="SQL Server port")
    name: str = Field("", description="Database name")
    trusted: bool = Field(True, description="Use a trusted (integrated) connection")
    domain: str = Field("", description="Domain for explicit credentials")
    username: str = Field("", description="User name for explicit credentials")
    password: SecretStr = Field(SecretStr(""), description="Password for explicit credentials")
    timeout: int = Field(30, description="Seconds to wait for a connection")
    exempt_computers: List[str] = Field(
        default_factory=list, alias="exemptcomputers", description="Computers never removed"
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number."""
        if v < 1 or v > 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("exempt_computers", mode="before")
    @classmethod
    def null_exemptions(cls, v):
        """A null list in the file means no exemptions."""
        return [] if v is None else v

    @model_validator(mode="after")
    def check_credentials(self) -> "DatabaseSettings":
        if not self.trusted and not (self.username and self.password.get_secret_value()):
            raise ValueError("username and password are required when trusted is false")
        return self


class LoggingSettings(BaseModel):
    """Log file output."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    enabled: bool = Field(False, description="Write a daily log file")
    location: str = Field(".", description="Directory for log files")


class SyncConfig(BaseModel):
    """Root of config.json."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    active_directory: ActiveDirectorySettings = Field(
        default_factory=ActiveDirectorySettings, alias="activedirectory"
    )
    azure: AzureSettings = Field(default_factory=AzureSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="after")
    def check_sources(self) -> "SyncConfig":
        if self.active_directory.enabled and not self.active_directory.dn:
            raise ValueError("activedirectory.dn is required when Active Directory is enabled")
        if self.azure.enabled and not self.azure.uses_graph:
            if not self.azure.domain:
                raise ValueError("azure.domain is required when Azure is enabled")
            if not self.active_directory.username:
                raise ValueError("activedirectory.username is required to sign in to Azure")
        return self
