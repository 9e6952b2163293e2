"""GitLab Dashboard web backend."""
