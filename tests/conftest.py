import os

# 必须在导入 app 之前设置，Settings 在导入时读取环境变量
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["NOTIFICATION_TTL_DAYS"] = "90"
os.environ["LOG_LEVEL"] = "WARNING"
