from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Настройки приложения
    APP_NAME: str = "Course Marketplace"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    
    # Настройки базы данных
    DATABASE_URL: str = "sqlite:///./coursemarket.db"
    
    # Проверка токенов провайдера идентификации
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    
    # Хранилище и CDN
    CDN_BASE_URL: str = "https://cdn.example.com"
    STORAGE_UPLOAD_URL: str = "https://storage.example.com/upload"
    STORAGE_SIGNING_KEY: str = "storage-signing-key-change-in-production"
    SIGNED_URL_TTL: int = 3600  # секунды
    
    # Кэш
    PUBLIC_PROFILE_CACHE_TTL: int = 600  # секунды
    CATEGORIES_CACHE_TTL: int = 300
    
    # Платежи (заглушка шлюза)
    PAYMENT_CHECKOUT_URL: str = "https://pay.example.com/checkout"
    PAYMENT_CURRENCY: str = "VND"
    PAYMENT_WEBHOOK_SECRET: str = "payment-webhook-secret-change-in-production"
    
    # Настройки CORS
    ALLOWED_ORIGINS: list = ["http://localhost:3000"]
    
    class Config:
        env_file = ".env"

settings = Settings()
