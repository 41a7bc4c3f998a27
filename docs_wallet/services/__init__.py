# Services package init
"""
Docs Wallet Backend — Services Layer
=====================================

Service Inventory:
    - TokenService:  Bearer token issuance and verification (PyJWT)
    - ObjectStore:   S3-compatible upload / delete / ping (boto3)
    - FileService:   Temporary staging of multipart payloads (aiofiles)
    - ImageService:  Upload workflow, owner listing, two-step delete
    - UserService:   Idempotent registration and lookup
    - WorkService:   Owner-scoped works CRUD

Stateful handles (engine, bucket client, staging directory, signing key)
live on AppContext; the business services are stateless singletons that
receive those handles per call.
"""
