"""
adgen-api Application Package

Directory Structure:
├── routers/           # FastAPI route handlers
├── schemas/           # Pydantic models for API requests/responses
│   └── api_schemas.py # HTTP request/response structures
├── application/       # Generation workflows and project services
├── domain/            # Errors, events, workflow state machine, prompts
├── db/                # SQLAlchemy models, session and repositories
│   └── repositories/  # Projects, users and the credit ledger
├── infrastructure/    # Image and video generation providers
├── storage/           # Asset store implementations
│   ├── filesystem.py  # Local filesystem storage
│   └── s3.py          # S3 storage
└── config.py          # Application configuration

Every paid generation reserves credits through the ledger first. If any
later step fails, the project is marked failed and the reservation is
refunded exactly once.
"""
