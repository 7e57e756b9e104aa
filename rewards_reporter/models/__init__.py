"""
Types here are instantiated as subclasses of pydantic's `BaseModel`.
This means we get runtime deserialization and validation for free just by using type declarations
and a couple of pydantic helpers.

Use these in your code as python objects, then serialize to json with `.model_dump(mode="json")`
"""

from rewards_reporter.models.types import *
from rewards_reporter.models.Config import *
from rewards_reporter.models.Event import *
from rewards_reporter.models.State import *
from rewards_reporter.models.Reward import *
from rewards_reporter.models.Claim import *
from rewards_reporter.models.Writer import *
from rewards_reporter.models.DB import *
