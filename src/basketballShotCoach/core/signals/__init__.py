from basketballShotCoach.core.signals.smoothing import OneEuroFilter, KeypointSmoother, smoothing_factor
