from pathlib import Path

from decouple import Csv, config

# -------------------------------
# Diretórios base
# -------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

# -------------------------------
# Segurança e debug
# -------------------------------
SECRET_KEY = config('SECRET_KEY', default='dev-insecure-secret-key-troque-em-producao')
DEBUG = config('DEBUG', default=False, cast=bool)
ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1,testserver', cast=Csv())

# -------------------------------
# Cookies & CSRF
# -------------------------------
SESSION_COOKIE_SECURE   = config('SESSION_COOKIE_SECURE', default=False, cast=bool) # Desenvolvido para HTTPS
SESSION_COOKIE_HTTPONLY = config('SESSION_COOKIE_HTTPONLY', default=True, cast=bool)
CSRF_COOKIE_SECURE      = config('CSRF_COOKIE_SECURE', default=False, cast=bool) # Desenvolvido para HTTPS

SECURE_SSL_REDIRECT          = config('SECURE_SSL_REDIRECT', default=False, cast=bool)
SECURE_HSTS_SECONDS          = config('SECURE_HSTS_SECONDS', default=0, cast=int)
SECURE_PROXY_SSL_HEADER      = ('HTTP_X_FORWARDED_PROTO', 'https')

# -------------------------------
# CORS
# -------------------------------
CORS_ALLOW_ALL_ORIGINS = config('CORS_ALLOW_ALL_ORIGINS', default=False, cast=bool)
CORS_ALLOW_CREDENTIALS = config('CORS_ALLOW_CREDENTIALS', default=True, cast=bool)
CSRF_TRUSTED_ORIGINS  = config('CSRF_TRUSTED_ORIGINS', default='http://localhost:3000', cast=Csv())
CORS_ALLOWED_ORIGINS   = config('CORS_ALLOWED_ORIGINS',   default='http://localhost:3000', cast=Csv())
CORS_ALLOW_METHODS     = config('CORS_ALLOW_METHODS',     default='GET,POST,PUT,PATCH,DELETE,OPTIONS', cast=Csv())
CORS_ALLOW_HEADERS     = config('CORS_ALLOW_HEADERS',     default='Authorization,Content-Type,X-Request-ID', cast=Csv())

# -------------------------------
# Asaas (gateway de pagamentos)
# -------------------------------
ASAAS_API_BASE       = config('ASAAS_API_BASE', default='https://api.asaas.com/v3')
ASAAS_TIMEOUT        = config('ASAAS_TIMEOUT', default=10.0, cast=float)
ASAAS_RETRIES        = config('ASAAS_RETRIES', default=3, cast=int)
ASAAS_USER_AGENT     = config('ASAAS_USER_AGENT', default='gestao-clinica-api')
# segredo compartilhado para autenticar o webhook; vazio = webhook recusa tudo
ASAAS_WEBHOOK_SECRET = config('ASAAS_WEBHOOK_SECRET', default='')

# -------------------------------
# Crypto
# -------------------------------
ENCRYPTION_KEY = config('ENCRYPTION_KEY', default='d2-Wze_mUxYYGznhQk0lRLhxWrUPNEZQsnxrdjvjT4k=')

# -------------------------------
# JWT
# -------------------------------
JWT_SECRET     = config('JWT_SECRET', default='dev-jwt-secret-troque-em-producao')
JWT_ALGORITHM  = config('JWT_ALGORITHM', default='HS256')
JWT_AUDIENCE   = config('JWT_AUDIENCE', default='')
JWT_EXPIRES_IN = config('JWT_EXPIRES_IN', default=3600, cast=int)

# -------------------------------
# Paginação
# -------------------------------
DEFAULT_PAGE_LIMIT = config('DEFAULT_PAGE_LIMIT', default=20, cast=int)
MAX_PAGE_LIMIT     = config('MAX_PAGE_LIMIT', default=100, cast=int)

# -------------------------------
# Apps, Middleware, URLs
# -------------------------------
INSTALLED_APPS = [
    'corsheaders',
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'drf_yasg',
    'django_prometheus',
    'gestao_clinica_api.apps.GestaoClinicaConfig',
    'plugins.django_interface.apps.DjangoInterfaceConfig',
]

MIDDLEWARE = [
    'django_prometheus.middleware.PrometheusBeforeMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'plugins.django_interface.request_middleware.RequestContextMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django_prometheus.middleware.PrometheusAfterMiddleware',
]

ROOT_URLCONF = 'gestao_clinica_api.urls'
WSGI_APPLICATION = 'gestao_clinica_api.wsgi.application'
ASGI_APPLICATION = 'gestao_clinica_api.asgi.application'

# -------------------------------
# Templates
# -------------------------------
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

# -------------------------------
# REST Framework
# -------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "clinica_core.adapters.security.jwt_authentication.JWTAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": (
        "rest_framework.permissions.IsAuthenticated",
    ),
    "EXCEPTION_HANDLER": "plugins.django_interface.exception_handler.api_exception_handler",
    "COERCE_DECIMAL_TO_STRING": False,
}
SWAGGER_SETTINGS = {
    'SECURITY_DEFINITIONS': {
        'Bearer': {
            'type': 'apiKey', 'name': 'Authorization', 'in': 'header'
        }
    },
}

# -------------------------------
# Banco de Dados
# -------------------------------
DB_ENGINE = config('DB_ENGINE', default='django.db.backends.sqlite3')

if DB_ENGINE.endswith('sqlite3'):
    DATABASES = {
        'default': {
            'ENGINE': DB_ENGINE,
            'NAME':   config('DB_NAME', default=str(BASE_DIR / 'db.sqlite3')),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE':   DB_ENGINE,
            'NAME':     config('DB_NAME'),
            'USER':     config('DB_USER'),
            'PASSWORD': config('DB_PASS'),
            'HOST':     config('DB_HOST'),
            'PORT':     config('DB_PORT', default='5432'),
        }
    }

# -------------------------------
# Internacionalização
# -------------------------------
LANGUAGE_CODE = 'pt-br'
TIME_ZONE     = 'America/Sao_Paulo'
USE_I18N      = True
USE_TZ        = True

# -------------------------------
# Arquivos estáticos
# -------------------------------
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedStaticFilesStorage"},
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
