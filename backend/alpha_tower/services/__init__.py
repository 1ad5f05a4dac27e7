"""
Alpha Tower Backend — Services Layer
======================================

What:  Business rules between the route handlers (HTTP) and the repositories.
How:   One class per use case, each with a single async `execute()`.
       Services receive their repository (and hasher / file service)
       through the constructor and hold no state between requests.

Service Inventory:
    - product_service: Create/List/Show/Update/DeleteProductService
    - user_service:    Create/List/Show/Update/DeleteUserService,
                       UpdateUserAvatarService, CreateSessionService
    - file_service:    FileService (avatar upload storage)
"""
