"""Core infrastructure package for shared application functionality.

- **config**: Centralized configuration management with environment support
- **constraints**: Per-entity domain constraint registry backed by pydantic
- **context**: Request correlation ID management
- **exceptions**: Structured exception hierarchy with error codes
- **error_context**: Sensitive data sanitization for safe logging
- **logging**: Structured logging with Loguru
- **types**: Type aliases for JSON documents and error objects
"""
