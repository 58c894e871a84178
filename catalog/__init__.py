"""Local Library catalog: a Flask app over an SQLAlchemy entity store."""
