import os
from typing import Optional

from tinydb import TinyDB

from rewards_reporter.models.Claim import MerkleDistribution, VerificationResult
from rewards_reporter.models.Config import Config
from rewards_reporter.models.Reward import RewardEntry, RewardSummary


class DB(TinyDB):
    """
    Report database for a single run, kept next to the json and csv reports
    so a distribution can be inspected after the fact.
    """

    config: Config

    def __init__(self, conf: Config, drop=False, **kwargs):
        self.config = conf
        path = f"{conf.run_dir}/reporter-db.json"

        # check if the directory exists
        create_dirs = self.exists(path) == False
        super().__init__(
            path,
            indent=4,
            create_dirs=create_dirs,
            **kwargs,
        )

        if drop:
            self.drop_tables()

    @staticmethod
    def exists(path: str):
        return os.path.exists(path)

    def write_distribution(self, rewards: list[RewardEntry]):
        self.table("distribution").insert_multiple(
            [r.model_dump(mode="json") for r in rewards]
        )

    def write_stats(
        self,
        summary: RewardSummary,
        distribution: Optional[MerkleDistribution],
        verification: Optional[VerificationResult],
    ):
        self.table("stats").insert(
            {
                "summary": summary.model_dump(mode="json"),
                "merkle_root": distribution.merkleRoot if distribution else None,
                "token_total": distribution.tokenTotal if distribution else None,
                "verification": verification.model_dump(mode="json")
                if verification
                else None,
            }
        )

    def write_run(
        self,
        rewards: list[RewardEntry],
        summary: RewardSummary,
        distribution: Optional[MerkleDistribution],
        verification: Optional[VerificationResult] = None,
    ):
        self.write_distribution(rewards)
        self.write_stats(summary, distribution, verification)
