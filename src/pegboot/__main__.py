# coding=utf-8
#

"""
 Copyright (c) 2023, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

from pegboot.starter import main

if __name__ == '__main__':
    main()
