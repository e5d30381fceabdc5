"""Core package for cross-cutting functionality.

- **config**: Settings loaded from the environment
- **constants**: shared constants and exit codes
- **exceptions**: structured exception hierarchy
- **initializers**: ordered asynchronous initialization
- **logging**: Loguru setup and error reporting sink
- **types**: shared type aliases
"""
