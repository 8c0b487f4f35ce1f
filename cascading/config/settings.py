"""
Environment settings.

Values are read from the process environment after loading an optional
.env file, through the small typed helpers below.
"""
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, Field


def get_env_str(key: str, default: str = '') -> str:
    """
    Get environment variable as a stripped string.
    
    Args:
        key: Environment variable key
        default: Default value if key is not set
        
    Returns:
        String value
    """
    return os.environ.get(key, default).strip()


def get_env_int(key: str, default: int = 0) -> int:
    """
    Get environment variable as integer.
    
    Args:
        key: Environment variable key
        default: Default value if key is not set
        
    Returns:
        Integer value
    """
    try:
        return int(os.environ.get(key, str(default)))
    except ValueError:
        return default


class Settings(BaseModel):
    """
    Runtime settings for the field catalog client and logging.
    """

    organization_url: str = Field(default='', description="Azure DevOps organization URL")
    project: str = Field(default='', description="Project name")
    project_id: str = Field(default='', description="Project id; the name is used when empty")
    personal_access_token: str = Field(default='', description="PAT used for the REST API")
    api_version: str = Field(default='7.1', description="Work item tracking REST API version")
    http_timeout: int = Field(default=30, description="HTTP timeout in seconds")
    log_level: str = Field(default='INFO', description="Console log level")
    log_dir: str = Field(default='', description="Directory for JSON logs; empty disables file logging")

    @property
    def effective_project_id(self) -> str:
        return self.project_id or self.project

    @property
    def has_remote_catalog(self) -> bool:
        return bool(self.organization_url and self.effective_project_id)


def load_settings(env_file: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from the environment.

    Args:
        env_file: Optional .env path; defaults to '.env' in the working directory.
                  Variables already set in the environment take precedence.
    """
    load_dotenv(env_file or Path('.env'))

    return Settings(
        organization_url=get_env_str('AZURE_DEVOPS_ORG_URL'),
        project=get_env_str('AZURE_DEVOPS_PROJECT'),
        project_id=get_env_str('AZURE_DEVOPS_PROJECT_ID'),
        personal_access_token=get_env_str('AZURE_DEVOPS_PAT'),
        api_version=get_env_str('AZURE_DEVOPS_API_VERSION', '7.1') or '7.1',
        http_timeout=get_env_int('CASCADING_HTTP_TIMEOUT', 30),
        log_level=get_env_str('CASCADING_LOG_LEVEL', 'INFO').upper() or 'INFO',
        log_dir=get_env_str('CASCADING_LOG_DIR'),
    )
