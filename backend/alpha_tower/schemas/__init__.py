"""
Alpha Tower Backend — API Schemas
===================================

What:  Pydantic request/response models (the API contract).
How:   Request bodies are validated before a route handler runs; response
       models decide exactly which record fields leave the server.
"""
