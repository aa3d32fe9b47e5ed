# migrations/env.py
import os
from alembic import context
from sqlalchemy import engine_from_config, pool
from civic_events.db.base import Base
from civic_events.db.session import normalize_url
import civic_events.models  # noqa: F401  registra as tabelas

# (1) carregar .env
from dotenv import load_dotenv
load_dotenv()

config = context.config

# (2) URL: DATABASE_URL do ambiente, senão a mesma default do app
db_url = os.getenv("DATABASE_URL")
if not db_url or db_url.strip() == "":
    from civic_events.core.config import settings
    db_url = settings.DATABASE_URL
config.set_main_option("sqlalchemy.url", normalize_url(db_url))

target_metadata = Base.metadata

def run_migrations_offline():
    url = config.get_main_option("sqlalchemy.url")
    context.configure(url=url, target_metadata=target_metadata, literal_binds=True, render_as_batch=True)
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    connectable = engine_from_config(config.get_section(config.config_ini_section), prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
