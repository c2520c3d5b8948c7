from dungeon_game import db


class HiScore(db.Model):
    __tablename__ = 'hiscores'
    USERNAME_MAX_LEN = 64

    # Ids are handed out by the leaderboard cache, not the database
    entry_id = db.Column('entryId', db.Integer, primary_key=True, autoincrement=False)
    username = db.Column(db.String(USERNAME_MAX_LEN))
    time_taken = db.Column('timeTaken', db.String(20))