"""Application services: request execution, response classification, pagination."""
