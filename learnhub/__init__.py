"""LearnHub Backend.

Online-learning platform API serving the tutor console and the student
portal: courses, modules, materials, enrollments, progress tracking,
assignments, reviews, uploads and analytics.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
