from odessa import commands


def get_commands():
    """Build the chat command registry."""
    return {
        "/start": commands.start,
        "/help": commands.help_,
        "/commands": commands.commands,
        "/whosplaying": commands.whosplaying,
        "/schedule": commands.schedule,
        "/next": commands.next_event,
        "/countdown": commands.countdown,
        "/dj": commands.dj,
        "/discover": commands.discover,
        "/venue": commands.venue,
        "/location": commands.location,
        "/types": commands.types,
    }
