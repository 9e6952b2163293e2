"""
GitLab Dashboard Core Library.

Configuration, logging, the dependency registry, the GitLab HTTP client and
the user service used by the web backend.

Usage:
    from gitlab_dashboard.config import get_settings
    from gitlab_dashboard.container import Container
    from gitlab_dashboard.logging import get_logger
"""

__version__ = "1.0.0"
