class OpenAPIToMCPError(Exception):
    """Base exception for OpenAPI to MCP converter errors."""
    pass

class ParseError(OpenAPIToMCPError):
    """Raised when an API description cannot be read or parsed."""
    pass

class DereferenceError(ParseError):
    """Raised when a $ref cannot be resolved."""
    pass

class ValidationError(OpenAPIToMCPError):
    """Raised when a parsed API description fails structural validation."""
    pass

class ConversionError(OpenAPIToMCPError):
    """Raised when there is an error during the conversion process."""
    pass

class TemplateError(ConversionError):
    """Raised when an overlay template cannot be read or parsed."""
    pass
