from sqlalchemy.orm import declarative_base

# Create a base class for our models to inherit from
Base = declarative_base()
