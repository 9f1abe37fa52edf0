from bodyparser.middleware.json_body import JSONBodyParserMiddleware

__all__ = ["JSONBodyParserMiddleware"]
