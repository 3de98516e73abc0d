from urikit.config.user import UriConfiguration, load_configuration

__all__ = ["UriConfiguration", "load_configuration"]
