"""
Jobly Backend
A job board data layer over PostgreSQL.

Architecture:
- PostgreSQL: users, companies, jobs, applications
- Services: one per entity, raw SQL through SQLAlchemy sessions
- utils.sql: builders for partial UPDATE and filtered SELECT clauses
"""

__version__ = "1.0.0"
