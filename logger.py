import logging
import os

LOG_FILE = "bot.log"

# Формат логов
log_format = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
date_format = "%Y-%m-%d %H:%M:%S"

# Отдельные именованные логгеры
app_logger = logging.getLogger("bot.app")
db_logger = logging.getLogger("bot.db")
engine_logger = logging.getLogger("bot.engine")


def setup_logging(log_dir: str = "logs", level: int = logging.INFO) -> None:
    """Файл logs/bot.log + вывод в консоль. Вызывается один раз из main.py."""
    os.makedirs(log_dir, exist_ok=True)

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[
            logging.FileHandler(os.path.join(log_dir, LOG_FILE), encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )
    # aiogram слишком разговорчив на INFO при каждом апдейте
    logging.getLogger("aiogram.event").setLevel(logging.WARNING)
