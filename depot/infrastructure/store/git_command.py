"""Safe Git command execution only"""
import subprocess
import asyncio
from dataclasses import dataclass
from typing import List, Optional, Dict
from pathlib import Path
import os


@dataclass
class CommandResult:
    """Result of Git command execution"""
    exit_code: int
    stdout: bytes
    stderr: bytes
    
    @property
    def success(self) -> bool:
        return self.exit_code == 0


class GitError(Exception):
    """Base class for Git errors"""
    pass


class GitCommandError(GitError):
    """Git command execution failed"""
    def __init__(self, command: str, exit_code: int, stderr: str):
        super().__init__(f"Git command '{command}' failed with exit code {exit_code}: {stderr}")
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr


class GitTimeoutError(GitError):
    """Git operation timed out"""
    def __init__(self, command: str, timeout: int):
        super().__init__(f"Git command '{command}' timed out after {timeout} seconds")
        self.command = command
        self.timeout = timeout


class GitSecurityError(GitError):
    """Security violation in Git operation"""
    pass


class GitCommandExecutor:
    """Handles Git command execution only"""
    
    # Whitelisted Git commands
    ALLOWED_COMMANDS = {
        'init', 'add', 'rm', 'commit', 'tag', 'status'
    }
    
    def __init__(self, git_binary: str = 'git', timeout: int = 300):
        """
        Initialize executor
        
        Args:
            git_binary: Path to git binary
            timeout: Command timeout in seconds
        """
        self.git_binary = git_binary
        self.timeout = timeout
    
    async def execute(
        self,
        args: List[str],
        cwd: Optional[Path] = None,
        input_data: Optional[bytes] = None,
        env: Optional[Dict[str, str]] = None
    ) -> CommandResult:
        """
        Execute Git command safely
        
        Args:
            args: Git command arguments (without 'git')
            cwd: Working directory
            input_data: Input to send to command
            env: Environment variables
            
        Returns:
            CommandResult with output
            
        Raises:
            GitSecurityError: If command is not allowed
            GitCommandError: If command fails
            GitTimeoutError: If command times out
        """
        if not args or args[0] not in self.ALLOWED_COMMANDS:
            raise GitSecurityError(f"Command not allowed: {args[0] if args else 'empty'}")
        
        self._validate_args_security(args)
        
        cmd = [self.git_binary] + args
        
        cmd_env = os.environ.copy()
        if env:
            cmd_env.update(env)
        
        cmd_env.update({
            'GIT_TERMINAL_PROMPT': '0',  # Disable prompts
            'GIT_ASKPASS': '/bin/echo',   # Disable password prompts
            'LC_ALL': 'C',                # Consistent output
        })
        
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=subprocess.PIPE if input_data is not None else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=cwd,
                env=cmd_env
            )
        except OSError as e:
            raise GitCommandError(' '.join(args), -1, str(e))
        
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(input_data),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise GitTimeoutError(' '.join(args), self.timeout)
        
        result = CommandResult(
            exit_code=process.returncode,
            stdout=stdout,
            stderr=stderr
        )
        
        if not result.success:
            raise GitCommandError(
                ' '.join(args),
                result.exit_code,
                stderr.decode('utf-8', errors='replace')
            )
        
        return result
    
    def _validate_args_security(self, args: List[str]) -> None:
        """
        Validate command arguments for security
        
        Args:
            args: Command arguments to validate
            
        Raises:
            GitSecurityError: If arguments are unsafe
        """
        dangerous_chars = ['&', '|', ';', '$', '`', '\n', '\r', '<', '>']
        
        for arg in args:
            for char in dangerous_chars:
                if char in arg:
                    raise GitSecurityError(f"Unsafe character '{char}' in argument: {arg}")
            
            if arg.startswith('--') and '=' in arg:
                raise GitSecurityError(f"Unsafe option: {arg}")
