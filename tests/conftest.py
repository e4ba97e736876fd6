"""Shared fixtures: a small NestJS-style project."""

import pytest

USERS_CONTROLLER = """\
import { Body, Controller, Delete, Get, Param, Post, Query, Req } from '@nestjs/common';
import { Observable } from 'rxjs';

/**
 * User management endpoints
 */
@Controller('users')
export class UsersController {
  constructor(private readonly usersService: UsersService) {}

  /** List all users */
  @Get()
  findAll(@Query('page') page?: number): Promise<User[]> {
    return this.usersService.findAll({ page });
  }

  @Get(':id')
  findOne(@Param('id') id: string): Observable<User> {
    return this.usersService.findOne(id);
  }

  @Post()
  async create(@Body() dto: CreateUserDto, @Req() req: any): Promise<User> {
    const user = await this.usersService.create(dto);
    if (user.name === '}') {
      return user;
    }
    return user;
  }

  @Delete(':id')
  remove(@Param('id') id: string): void {}

  private audit(message: string): void {
    console.log(`audit ${message} {`);
  }
}
"""

USERS_DTO = """\
import { IsEmail, IsOptional, IsString, Min, MinLength } from 'class-validator';

export enum Role {
  Admin = 'admin',
  User = 'user',
}

/** A registered user */
export interface User {
  id: string;
  name: string;
  email: string;
  age?: number;
  role: Role;
  createdAt: Date;
}

export class CreateUserDto {
  /** Display name */
  @IsString()
  @MinLength(3)
  name: string;

  @IsEmail({}, { message: 'email must be valid' })
  email: string;

  @IsOptional()
  @Min(0)
  age: number;

  role: Role;

  active = true;
}
"""

USERS_SERVICE = """\
import { Injectable } from '@nestjs/common';

@Injectable()
export class UsersService {
  constructor(
    private readonly repo: UserRepository,
    private readonly config: ConfigService,
  ) {}

  async findAll(options?: { page?: number }): Promise<User[]> {
    return [];
  }

  protected log(msg: string) {}
}
"""


@pytest.fixture
def sample_project(tmp_path):
    """Project tree with a controller, DTOs, a service and files to skip"""
    src = tmp_path / "src"
    users = src / "users"
    users.mkdir(parents=True)
    (users / "users.controller.ts").write_text(USERS_CONTROLLER)
    (users / "users.dto.ts").write_text(USERS_DTO)
    (users / "users.service.ts").write_text(USERS_SERVICE)
    (users / "users.controller.spec.ts").write_text("export interface SpecOnly { a: string }\n")

    vendored = src / "node_modules" / "lib"
    vendored.mkdir(parents=True)
    (vendored / "index.ts").write_text("export interface Vendored { a: string }\n")
    return src
