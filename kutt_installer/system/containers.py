# Path and File Name : /home/kutt/kutt-installer/kutt_installer/system/containers.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Docker engine and compose capability - install, compose up/down, container and image cleanup

"""
Container Runtime capability backed by the docker CLI and compose plugin.
"""

from pathlib import Path
from typing import List, Optional

from .commands import CommandRunner


class DockerEngine:
    """Runs docker and docker compose."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def is_available(self) -> bool:
        return self.runner.which('docker') is not None

    def compose_available(self) -> bool:
        return self.runner.succeeds(['docker', 'compose', 'version'])

    def install(self, install_url: str) -> None:
        """Install Docker with the upstream convenience script."""
        self.runner.run_shell(f"curl -fsSL {install_url} | sh")

    @staticmethod
    def compose_args(compose_file: str, env_file: Optional[str] = ".env") -> List[str]:
        args = ['docker', 'compose', '-f', compose_file]
        if env_file:
            args += ['--env-file', env_file]
        return args

    def compose_up(self, project_dir: Path, compose_file: str, build: bool = True) -> None:
        args = self.compose_args(compose_file) + ['up', '-d']
        if build:
            args.append('--build')
        self.runner.run(args, cwd=project_dir)

    def compose_down(self, project_dir: Path, compose_file: str, remove_volumes: bool = True) -> None:
        args = ['docker', 'compose', '-f', str(Path(project_dir) / compose_file), 'down']
        if remove_volumes:
            args += ['-v', '--remove-orphans']
        self.runner.run(args, cwd=project_dir)

    def containers_for_project(self, project_dir: Path) -> List[str]:
        """IDs of containers compose created from project_dir."""
        result = self.runner.run([
            'docker', 'ps', '-a', '-q',
            '--filter', f"label=com.docker.compose.project.working_dir={project_dir}",
        ], check=False)
        return result.stdout.split() if result.returncode == 0 else []

    def container_names_matching(self, needle: str) -> List[str]:
        result = self.runner.run(['docker', 'ps', '-a', '--format', '{{.Names}}'], check=False)
        if result.returncode != 0:
            return []
        return [n for n in result.stdout.split() if needle.lower() in n.lower()]

    def remove_containers(self, names: List[str]) -> None:
        if names:
            self.runner.run(['docker', 'rm', '-f'] + list(names))

    def images_matching(self, needle: str) -> List[str]:
        """Image IDs whose repository name contains needle."""
        result = self.runner.run(['docker', 'images', '--format', '{{.Repository}} {{.ID}}'], check=False)
        if result.returncode != 0:
            return []
        ids = []
        for line in result.stdout.splitlines():
            parts = line.split()
            if len(parts) == 2 and needle.lower() in parts[0].lower() and parts[1] not in ids:
                ids.append(parts[1])
        return ids

    def remove_images(self, image_ids: List[str]) -> None:
        if image_ids:
            self.runner.run(['docker', 'rmi', '-f'] + list(image_ids))
