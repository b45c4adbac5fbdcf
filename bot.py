"""
Telegram Bot — the chat front-end for the weather lookup.

A plain text message is a city submission, /weather looks up the
staged city again and /back starts over. Each user gets their own
Router, stored in that user's user_data, which is also its session
storage. Also serves the web UI in a background thread.

Usage:
  python bot.py
"""

import logging
import sys
import threading

from telegram import Update
from telegram.ext import (
    Application,
    ApplicationBuilder,
    CommandHandler,
    MessageHandler,
    filters,
    ContextTypes,
)

from config import TELEGRAM_BOT_TOKEN, OWNER_CHAT_ID, LOG_LEVEL
from models import ViewState
from router import Router
from views import ResultView

logging.basicConfig(
    format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
    level=LOG_LEVEL,
)
log = logging.getLogger("bot")

ROUTER_KEY = "router"

PROMPT = "Send me a city name and I'll look up the current weather."
HELP = (
    f"{PROMPT}\n\n"
    "/weather  — look up the last city again\n"
    "/back  — start over\n"
    "/help  — show this message"
)


# ── Auth ────────────────────────────────────────────────────────

def owner_only(func):
    """Restrict to OWNER_CHAT_ID. Set to 0 in .env to allow everyone."""
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE):
        if OWNER_CHAT_ID and update.effective_chat.id != OWNER_CHAT_ID:
            await update.effective_message.reply_text("Not authorized.")
            return
        return await func(update, context)
    return wrapper


# ── Helpers ─────────────────────────────────────────────────────

def _router(context: ContextTypes.DEFAULT_TYPE) -> Router:
    """One router per user. bot_data["fetch"] overrides the provider call."""
    router = context.user_data.get(ROUTER_KEY)
    if router is None:
        router = Router(context.user_data, context.bot_data.get("fetch"))
        context.user_data[ROUTER_KEY] = router
    return router


def format_result(view: ResultView) -> str:
    if view.state is ViewState.ERROR:
        return view.error
    r = view.reading
    return (
        f"Weather for {r.location}\n"
        f"{r.condition} ({r.description})\n"
        f"Temp: {r.celsius}°C / {r.fahrenheit}°F\n"
        f"Humidity: {r.humidity:g}%\n"
        f"Wind: {r.wind_speed:g} m/s"
    )


async def _show_results(update: Update, router: Router):
    state = await router.open_results()
    if state is None:
        return  # superseded by /back or a newer lookup
    if state is ViewState.REDIRECTING:
        await update.effective_message.reply_text(PROMPT)
        return
    await update.effective_message.reply_text(format_result(router.result))


# ── Command handlers ────────────────────────────────────────────

@owner_only
async def cmd_start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    _router(context).back()
    await update.effective_message.reply_text(HELP)


@owner_only
async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await cmd_start(update, context)


@owner_only
async def cmd_back(update: Update, context: ContextTypes.DEFAULT_TYPE):
    _router(context).back()
    await update.effective_message.reply_text(PROMPT)


@owner_only
async def cmd_weather(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await _show_results(update, _router(context))


@owner_only
async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Treat plain text as a city submission."""
    router = _router(context)
    if not router.entry.submit(update.effective_message.text):
        await update.effective_message.reply_text(router.entry.error)
        return
    await _show_results(update, router)


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE):
    log.error("Unhandled error while processing an update", exc_info=context.error)


# ── Main ────────────────────────────────────────────────────────

def start_web_in_thread():
    """Run the Flask web UI in a background thread."""
    try:
        from web import create_app
        app = create_app()
        # Suppress Flask request logs in the main console
        flask_log = logging.getLogger("werkzeug")
        flask_log.setLevel(logging.WARNING)
        from config import WEB_HOST, WEB_PORT
        log.info(f"Web UI: http://{WEB_HOST}:{WEB_PORT}")
        app.run(host=WEB_HOST, port=WEB_PORT, use_reloader=False)
    except Exception as e:
        log.error(f"Web UI failed to start: {e}")


def build_application(token: str) -> Application:
    # Concurrent updates let /back arrive while a lookup is in flight
    app = ApplicationBuilder().token(token).concurrent_updates(True).build()

    app.add_handler(CommandHandler("start", cmd_start))
    app.add_handler(CommandHandler("help", cmd_help))
    app.add_handler(CommandHandler("back", cmd_back))
    app.add_handler(CommandHandler("weather", cmd_weather))
    app.add_handler(MessageHandler(
        filters.UpdateType.MESSAGE & filters.TEXT & ~filters.COMMAND, handle_message
    ))
    app.add_error_handler(on_error)
    return app


def main():
    if not TELEGRAM_BOT_TOKEN:
        sys.exit("TELEGRAM_BOT_TOKEN is not set; run `python web.py` for the web UI only.")

    web_thread = threading.Thread(target=start_web_in_thread, daemon=True)
    web_thread.start()

    app = build_application(TELEGRAM_BOT_TOKEN)
    log.info("Bot starting (Telegram polling)...")
    app.run_polling()


if __name__ == "__main__":
    main()
