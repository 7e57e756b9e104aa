from rewards_reporter.rewards.weighted import *
from rewards_reporter.rewards.calculate import *
