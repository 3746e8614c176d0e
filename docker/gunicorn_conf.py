import multiprocessing
import os

wsgi_app = "recipe_assistant.main:create_app()"
bind = f"0.0.0.0:{os.getenv('PORT','8000')}"
workers = int(os.getenv("WEB_CONCURRENCY", str(multiprocessing.cpu_count()))) or 1
worker_class = "uvicorn.workers.UvicornWorker"
# must outlast LLM_TIMEOUT_SECONDS plus OCR, or workers die mid-request
timeout = int(os.getenv("TIMEOUT", "120"))
keepalive = 5
graceful_timeout = 30
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
