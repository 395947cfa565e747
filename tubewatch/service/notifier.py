class Notifier:
    # delivery is not wired up yet; the hook only logs what would be sent
    def __init__(self, logger):
        self.logger = logger

    def notify(self, videos):
        self.logger.info(f"send notification. ({len(videos)} video(s))")
        for v in videos:
            self.logger.info(f"  - [{v.channel_id}] {v.title} https://www.youtube.com/watch?v={v.id}")
