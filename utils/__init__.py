"""
Utilities Package
Configuration loading for the deployment script
"""

from .config import DeployConfig, redact_url

__all__ = ['DeployConfig', 'redact_url']
