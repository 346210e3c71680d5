"""
Jenkins domain models - Build queue and agent pool records

Represents the raw server state the collector aggregates:
    - QueueItem: a pending build in the Jenkins queue
    - WorkerRecord: a computer (built-in executor or connected agent)
"""

from dataclasses import dataclass


@dataclass
class QueueItem:
    """
    Represents an item in the Jenkins build queue.

    Attributes:
        buildable: True if the item is waiting only for a free executor
        job_name: Name of the job the item will build (queue item task.name)
        why: Optional human-readable reason the item is still queued
        job_url: Absolute job URL from task.url (None if Jenkins omitted it)
        is_pipeline_step: True for a Pipeline node {} step waiting for an
                          executor; it has no job config of its own

    Example:
        item = QueueItem(buildable=True, job_name="deploy-api", why="Waiting for next available executor")

        if item.buildable:
            print(f"{item.job_name} is ready to run")
    """

    buildable: bool
    job_name: str
    why: str | None = None
    job_url: str | None = None
    is_pipeline_step: bool = False


@dataclass
class WorkerRecord:
    """
    Represents a Jenkins computer from the /computer API.

    Attributes:
        display_name: Computer name, used to fetch its config.xml
        is_managed_agent: True for remotely connected (JNLP) agents,
                          False for the built-in/master executor
        is_idle: True if no executor on the computer is running a build
        offline: True if Jenkins reports the computer as offline
        labels: Space-separated label string from the computer's
                configuration (None until fetched)

    Example:
        worker = WorkerRecord(display_name="agent-01", is_managed_agent=True, is_idle=False)

        if worker.is_busy:
            print(f"{worker.display_name} is running a build")
    """

    display_name: str
    is_managed_agent: bool
    is_idle: bool
    offline: bool = False
    labels: str | None = None

    @property
    def is_busy(self) -> bool:
        """
        Check if the worker is currently running a build.

        Returns:
            True if not idle
        """
        return not self.is_idle

    def label_tokens(self) -> list[str]:
        """
        Split the label string into individual labels.

        Every non-empty token is returned, repeats included, so a label
        listed twice on one agent counts twice.

        Returns:
            Whitespace-separated tokens, in string order
        """
        if not self.labels:
            return []
        return self.labels.split()
