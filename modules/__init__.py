"""
Application Modules.

- backend/: Notes backend (API, services, repositories, models, configuration)
"""
