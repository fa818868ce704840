from trainlog.models.user import User
from trainlog.models.trainee_profile import TraineeProfile
from trainlog.models.exercise import Exercise
from trainlog.models.workout import Workout
from trainlog.models.workout_exercise import WorkoutExercise
from trainlog.models.training_plan import TrainingPlan
from trainlog.models.training_plan_day import TrainingPlanDay, TrainingPlanDayWorkout
from trainlog.models.workout_session import WorkoutSession
from trainlog.models.exercise_log import ExerciseLog
from trainlog.models.set_log import SetLog
from trainlog.models.trainee_active_plan import TraineeActivePlan

__all__ = [
    "User",
    "TraineeProfile",
    "Exercise",
    "Workout",
    "WorkoutExercise",
    "TrainingPlan",
    "TrainingPlanDay",
    "TrainingPlanDayWorkout",
    "WorkoutSession",
    "ExerciseLog",
    "SetLog",
    "TraineeActivePlan",
]
