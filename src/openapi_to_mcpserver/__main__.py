"""Entry point: python -m openapi_to_mcpserver"""

from .cli import main

if __name__ == "__main__":
    main()
