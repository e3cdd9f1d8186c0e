import os

import boto3

SSM_BACKED_PARAMETERS = ("DATABASE_URL", "JWT_SECRET")


class Settings:
    def __init__(self):
        self.DATABASE_URL = os.getenv("DATABASE_URL")
        self.JWT_SECRET = os.getenv("JWT_SECRET")
        self.SSM_PARAMETER_PREFIX = os.getenv("SSM_PARAMETER_PREFIX")
        self.SSM_REGION = os.getenv("SSM_REGION", "us-east-1")

        if self.SSM_PARAMETER_PREFIX:
            ssm = boto3.client("ssm", region_name=self.SSM_REGION)
            for name in SSM_BACKED_PARAMETERS:
                if not getattr(self, name):
                    setattr(self, name, self.get_parameter(ssm, name))

        if not self.DATABASE_URL:
            self.DATABASE_URL = "sqlite:///./campus_events.db"

        self.PORT = int(os.getenv("PORT", 3001))
        self.CORS_ORIGINS = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
            if origin.strip()
        ]
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        self.ALGORITHM = "HS256"
        self.ACCESS_TOKEN_EXPIRE_DAYS = 7
        self.BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def get_parameter(self, ssm, name):
        return ssm.get_parameter(Name=f"{self.SSM_PARAMETER_PREFIX}{name}", WithDecryption=True)['Parameter']['Value']

settings = Settings()
