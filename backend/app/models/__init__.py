from .club import Club
from .course import Course, Hole
from .handicap_history import HandicapHistory
from .player import Player
from .tournament import Tournament
from .tournament_participant import TournamentParticipant
from .tournament_score import HoleScore, TournamentScore

__all__ = [
    "Club",
    "Player",
    "Course",
    "Hole",
    "Tournament",
    "TournamentParticipant",
    "TournamentScore",
    "HoleScore",
    "HandicapHistory",
]
