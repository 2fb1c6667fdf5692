"""Application services: schemas, seeding, CRUD, credentials and auth."""
