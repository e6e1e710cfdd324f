"""
Persistence Layer - Prisma (PostgreSQL) implementations of the domain ports.

Modules here import the generated Prisma client, so they are only imported
when STORAGE_BACKEND=prisma (see portal_chat/setup/ioc/container.py).
"""
