#!/usr/bin/env python3
"""
Odessa schedule bot.

  odessa_bot.py whosplaying        print today's schedule
  odessa_bot.py schedule           print this week's schedule
  odessa_bot.py next               print the next event
  odessa_bot.py test               check the bot token (getMe)
  odessa_bot.py run                answer chat commands (long polling)
  odessa_bot.py post-schedule      post the weekly schedule to every group
  odessa_bot.py post-whosplaying   post today's schedule to every group
"""

import argparse
import sys
import time
import traceback
from datetime import datetime

from odessa import hipsy
from odessa.commands import handle_update
from odessa.formatters.info import next_event_message
from odessa.formatters.weekly import format_weekly_schedule
from odessa.formatters.whosplaying import format_whosplaying
from odessa.pipeline.dispatch import broadcast, broadcast_targets
from odessa.pipeline.io import write_run_log
from odessa.telegram import TelegramClient, TelegramError


def print_schedule(messages):
    for i, message in enumerate(messages, 1):
        print(f"--- Message {i} ---")
        for kind in ("video", "photo"):
            if message.get(kind):
                print(f"[{kind}] {message[kind]}")
        print(message.get("text", ""))
        keyboard = message.get("keyboard")
        if keyboard:
            for row in keyboard["inline_keyboard"]:
                print("  " + "  ".join(f"[{b['text']}]({b['url']})" for b in row))
    print()


def cmd_whosplaying(args):
    print_schedule(format_whosplaying(hipsy.get_events_for_day()))
    return 0


def cmd_schedule(args):
    print_schedule(format_weekly_schedule(hipsy.get_events_for_week()))
    return 0


def cmd_next(args):
    print_schedule(next_event_message(hipsy.find_next_event()))
    return 0


def cmd_test(args):
    me = TelegramClient().get_me()
    print(f"Bot OK: @{me.get('username')} (id {me.get('id')})")
    return 0


def cmd_run(args):
    client = TelegramClient()
    me = client.get_me()
    print(f"Polling as @{me.get('username')}... (Ctrl+C to stop)")

    offset = None
    while True:
        try:
            updates = client.get_updates(offset=offset)
        except TelegramError as e:
            print(f"  getUpdates failed: {e}")
            time.sleep(5)
            continue

        for update in updates or []:
            offset = update["update_id"] + 1
            try:
                handle_update(update, client)
            except Exception as e:
                print(f"  ERROR: update {update['update_id']} failed: {e}")
                print(f"  Traceback:\n{traceback.format_exc()}")


def post(kind, build):
    """Cron job: build a schedule and post it to every target chat."""
    run_timestamp = datetime.utcnow().isoformat() + "Z"
    log_lines = []

    def log(message, level="INFO"):
        """Log a message to both console and log buffer."""
        timestamp = datetime.utcnow().strftime("%Y-%m-%d %H:%M:%S")
        log_lines.append(f"[{timestamp}] [{level}] {message}")
        print(message)

    log(f"Starting {kind} post at {run_timestamp}")
    exit_code = 0

    try:
        messages = build(log)
        log(f"  Built {len(messages)} messages")

        targets = broadcast_targets()
        if not messages:
            results = {}
        elif not targets:
            log("WARNING: No target chats configured (TELEGRAM_GROUP_CHAT_ID or tracked groups)", "WARNING")
            results = {}
        else:
            log(f"Posting to {len(targets)} chats...")
            results = broadcast(messages, targets, TelegramClient(log_func=log), log_func=log)

        log("")
        log("=" * 60)
        log("CHAT SUMMARY")
        log("=" * 60)
        log(f"{'Chat':<24} {'Sent':>7} {'Status':>7} {'Time':>10}")
        log("-" * 60)
        for chat_id, d in results.items():
            status = "failed" if d.failed else "ok"
            log(f"{chat_id:<24} {d.messages_sent:>7} {status:>7} {d.duration_ms:>8.0f}ms")
        log("-" * 60)
        total_sent = sum(d.messages_sent for d in results.values())
        total_failed = sum(1 for d in results.values() if d.failed)
        total_time = sum(d.duration_ms for d in results.values())
        log(f"{'TOTAL':<24} {total_sent:>7} {total_failed:>7} {total_time:>8.0f}ms")
        log("=" * 60)

        failed = [str(chat_id) for chat_id, d in results.items() if d.failed]
        if failed:
            log(f"WARNING: Failed to post to: {', '.join(failed)}", "ERROR")
        if results and len(failed) == len(results):
            exit_code = 1

    except Exception as e:
        log(f"ERROR: {kind} post failed: {e}", "ERROR")
        log(f"  Traceback:\n{traceback.format_exc()}", "ERROR")
        exit_code = 1

    log_path = write_run_log(log_lines)
    print(f"Log saved to {log_path}")
    return exit_code


def cmd_post_schedule(args):
    return post("schedule", lambda log: format_weekly_schedule(hipsy.get_events_for_week(log_func=log)))


def cmd_post_whosplaying(args):
    def build(log):
        events = hipsy.get_events_for_day(log_func=log)
        if not events and not args.post_empty:
            log("  No events today, nothing to post")
            return []
        return format_whosplaying(events)

    return post("whosplaying", build)


def build_parser():
    parser = argparse.ArgumentParser(description="Odessa schedule bot")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("whosplaying", help="Print today's schedule").set_defaults(func=cmd_whosplaying)
    sub.add_parser("schedule", help="Print this week's schedule").set_defaults(func=cmd_schedule)
    sub.add_parser("next", help="Print the next upcoming event").set_defaults(func=cmd_next)
    sub.add_parser("test", help="Check the bot token").set_defaults(func=cmd_test)
    sub.add_parser("run", help="Answer chat commands via long polling").set_defaults(func=cmd_run)
    sub.add_parser("post-schedule", help="Post this week's schedule to all groups").set_defaults(
        func=cmd_post_schedule
    )

    whosplaying = sub.add_parser("post-whosplaying", help="Post today's schedule to all groups")
    whosplaying.add_argument(
        "--post-empty",
        action="store_true",
        help="Post the 'no events today' message instead of skipping",
    )
    whosplaying.set_defaults(func=cmd_post_whosplaying)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (TelegramError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
