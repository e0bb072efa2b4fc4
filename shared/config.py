import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./teams.db")

RABBITMQ_USER_DEFAULT = "guest"
RABBITMQ_PASSWORD_DEFAULT = "guest"
RABBITMQ_HOST_DEFAULT = "rabbitmq"
RABBITMQ_PORT_DEFAULT = "5672"
RABBITMQ_VHOST_DEFAULT = "/"

RABBITMQ_URL = os.getenv("RABBITMQ_URL")

if not RABBITMQ_URL:
    user = os.getenv("RABBITMQ_USER", RABBITMQ_USER_DEFAULT)
    password = os.getenv("RABBITMQ_PASSWORD", RABBITMQ_PASSWORD_DEFAULT)
    host = os.getenv("RABBITMQ_HOST", RABBITMQ_HOST_DEFAULT)
    port = os.getenv("RABBITMQ_PORT", RABBITMQ_PORT_DEFAULT)
    vhost = os.getenv("RABBITMQ_VHOST", RABBITMQ_VHOST_DEFAULT)

    if not vhost or vhost == "/":
        vhost_path = ""
    elif not vhost.startswith("/"):
        vhost_path = "/" + vhost
    else:
        vhost_path = vhost

    RABBITMQ_URL = f"amqp://{user}:{password}@{host}:{port}{vhost_path}"

MEMBERSHIP_SERVICE_URL = os.getenv("MEMBERSHIP_SERVICE_URL", "http://membershipapi:8000/v1/organizations/default")
MEMBERSHIP_SERVICE_TOKEN = os.getenv("MEMBERSHIP_SERVICE_TOKEN")
MEMBERSHIP_SERVICE_TIMEOUT = float(os.getenv("MEMBERSHIP_SERVICE_TIMEOUT", "30.0"))

SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")

# Nome de exibição do tipo de entidade "team" (ex.: "Team", "Company").
TEAM_ENTITY_LABEL = os.getenv("TEAM_ENTITY_LABEL", "Team")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Tempo máximo (segundos) da listagem de membros em cache; membros alterados
# fora deste serviço aparecem depois desse prazo.
MEMBERS_CACHE_MAX_AGE = float(os.getenv("MEMBERS_CACHE_MAX_AGE", "60"))
