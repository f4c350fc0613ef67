# Import all models so Base.metadata knows every table before create_all
from tracker.db.base_class import Base
from tracker.db.models.user import User
from tracker.db.models.bucket import Bucket, TaskDefinition
from tracker.db.models.log import DailyLog
from tracker.db.models.assignment import Assignment, TaskProgress
