"""
Web可视化模块
使用Flask + WebSocket提供迷宫编辑、仿真请求和轨迹回放接口
"""

import io
import logging
import threading
import time

from flask import Flask, jsonify, request, send_file
from flask_socketio import SocketIO, emit
from PIL import Image, ImageDraw

import config

from ..simulation.protocol import SimulatorInput

logger = logging.getLogger(__name__)

PLAYBACK_ACTIONS = ('play', 'stop', 'reset', 'scrub', 'speed_up', 'speed_down')


class WebVisualizer:
    """Web可视化器

    通过HTTP接口编辑迷宫、提交仿真和控制回放，回放时钟每拍通过WebSocket
    把当前画面推送到浏览器。

    接口:
    - GET  /api/config            画布几何和倍速表
    - GET  /api/maze              迷宫文本和墙列表
    - PUT  /api/maze              替换迷宫文本 {"maze_string": ...}
    - POST /api/maze/click        点击画布 {"x": .., "y": ..}
    - POST /api/simulate          提交仿真（可选完整输入）
    - GET  /api/frame             当前画面线段和回放状态
    - POST /api/playback/<action> 回放控制
    - GET  /api/snapshot.png      当前画面PNG

    Example:
        >>> session = ViewerSession()
        >>> visualizer = WebVisualizer(session, port=5000)
        >>> visualizer.start()
        >>> # 在浏览器中打开 http://localhost:5000
    """

    def __init__(self, session, host=config.WEB_HOST, port=config.WEB_PORT):
        """初始化Web可视化器

        Args:
            session: ViewerSession对象
            host: 服务器地址，'0.0.0.0'表示允许外部访问
            port: 服务器端口
        """
        self.session = session
        self.host = host
        self.port = port

        self.app = Flask(__name__)
        self.app.config['SECRET_KEY'] = config.WEB_SECRET_KEY

        self.socketio = SocketIO(self.app, cors_allowed_origins="*", async_mode='threading')

        self.frame_count = 0
        self.is_running = False
        self.server_thread = None

        # 回放器每次变化都推送一帧
        self.session.player.on_update = lambda index: self._emit_update()

        self._setup_routes()

        logger.info(f"[WebViz] 初始化完成，访问地址: http://localhost:{port}")

    def _setup_routes(self):
        """设置Flask路由"""
        app = self.app
        session = self.session

        @app.route('/')
        def index():
            """接口列表"""
            return jsonify({
                'name': 'mouse_viewer',
                'endpoints': sorted(str(rule) for rule in app.url_map.iter_rules()
                                    if str(rule).startswith('/api')),
            })

        @app.route('/api/config')
        def get_config():
            """画布几何和回放参数"""
            geometry = session.editor.geometry
            return jsonify({
                'width': geometry.width,
                'origin_x': geometry.origin_x,
                'origin_y': geometry.origin_y,
                'square_width': geometry.square_width,
                'square_width_m': geometry.square_width_m,
                'speeds': list(session.player.state.speeds),
                'tick_ms': session.player.tick_ms,
            })

        @app.route('/api/maze', methods=['GET'])
        def get_maze():
            return jsonify(self._maze_payload())

        @app.route('/api/maze', methods=['PUT'])
        def put_maze():
            data = request.get_json(silent=True) or {}
            text = data.get('maze_string')
            if not isinstance(text, str):
                return jsonify({'error': 'maze_string 必须是字符串'}), 400
            session.set_maze_string(text)
            self._emit_update()
            return jsonify(self._maze_payload())

        @app.route('/api/maze/click', methods=['POST'])
        def click_maze():
            data = request.get_json(silent=True) or {}
            try:
                x = float(data['x'])
                y = float(data['y'])
            except (KeyError, TypeError, ValueError):
                return jsonify({'error': '需要数字字段 x, y'}), 400

            wall = session.click(x, y)
            payload = self._maze_payload()
            payload['toggled'] = wall.to_dict() if wall is not None else None
            if wall is not None:
                self._emit_update()
            return jsonify(payload)

        @app.route('/api/simulate', methods=['POST'])
        def simulate():
            data = request.get_json(silent=True)
            sim_input = None
            if data:
                try:
                    sim_input = SimulatorInput.from_dict(data)
                except ValueError as e:
                    return jsonify({'error': str(e)}), 400
            generation = session.run_simulation(sim_input)
            return jsonify({'generation': generation}), 202

        @app.route('/api/frame')
        def get_frame():
            return jsonify(self._frame_payload())

        @app.route('/api/playback/<action>', methods=['POST'])
        def playback(action):
            player = session.player
            if action == 'play':
                player.play()
            elif action == 'stop':
                player.stop()
            elif action == 'reset':
                player.reset()
            elif action == 'scrub':
                data = request.get_json(silent=True) or {}
                value = data.get('value')
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    return jsonify({'error': 'value 必须是0~100的数字'}), 400
                player.scrub_to(value)
            elif action == 'speed_up':
                player.speed_up()
            elif action == 'speed_down':
                player.speed_down()
            else:
                return jsonify({'error': f'未知操作: {action}',
                                'actions': list(PLAYBACK_ACTIONS)}), 404
            return jsonify(player.snapshot())

        @app.route('/api/snapshot.png')
        def snapshot():
            buffer = self.render_png()
            return send_file(buffer, mimetype='image/png')

        @self.socketio.on('connect')
        def handle_connect():
            """客户端连接"""
            logger.info("[WebViz] 客户端已连接")
            emit('connection_response', {'status': 'connected'})

        @self.socketio.on('disconnect')
        def handle_disconnect():
            """客户端断开"""
            logger.info("[WebViz] 客户端已断开")

        @self.socketio.on('request_update')
        def handle_request_update():
            """客户端请求数据更新"""
            self._emit_update()

    def _maze_payload(self) -> dict:
        return self.session.maze_state()

    def _frame_payload(self) -> dict:
        scene = self.session.scene()
        scene['loading'] = self.session.loading
        scene['error'] = self.session.last_error
        return scene

    def start(self, blocking=False):
        """启动Web服务器和回放时钟

        Args:
            blocking: 是否阻塞运行（默认False，在后台线程运行）
        """
        self.is_running = True
        self.session.clock.start()

        if blocking:
            logger.info(f"[WebViz] 启动服务器（阻塞模式）: http://{self.host}:{self.port}")
            try:
                self.socketio.run(self.app, host=self.host, port=self.port,
                                  debug=False, use_reloader=False,
                                  allow_unsafe_werkzeug=True)
            finally:
                self.stop()
        else:
            self.server_thread = threading.Thread(
                target=lambda: self.socketio.run(
                    self.app,
                    host=self.host,
                    port=self.port,
                    debug=False,
                    use_reloader=False,
                    allow_unsafe_werkzeug=True
                ),
                daemon=True
            )
            self.server_thread.start()
            logger.info(f"[WebViz] ✅ 服务器已在后台启动: http://{self.host}:{self.port}")
            time.sleep(0.5)  # 等待服务器启动

    def stop(self):
        """停止推送和回放时钟"""
        self.is_running = False
        self.session.clock.stop()
        logger.info("[WebViz] 服务器已停止")

    def _emit_update(self):
        """向所有连接的客户端推送当前画面"""
        if not self.is_running:
            return

        try:
            data = self._frame_payload()
            data['frame'] = self.frame_count
            self.socketio.emit('update', data, namespace='/')
            self.frame_count += 1
        except Exception as e:
            logger.warning(f"[WebViz] 推送数据失败: {e}")

    def render_png(self) -> io.BytesIO:
        """把当前画面画成PNG

        Returns:
            PNG数据（已seek到开头）
        """
        geometry = self.session.editor.geometry
        margin = geometry.square_width
        width = int(geometry.origin_x + geometry.size_px + margin)
        height = int(geometry.origin_y + margin)

        img = Image.new('RGB', (max(width, 1), max(height, 1)), 'white')
        draw = ImageDraw.Draw(img)
        for start, end in self.session.wall_segments():
            draw.line([start, end], fill=config.COLOR_WALL, width=2)
        for start, end in self.session.robot_segments():
            draw.line([start, end], fill=config.COLOR_ROBOT, width=2)

        buffer = io.BytesIO()
        img.save(buffer, format='PNG')
        buffer.seek(0)
        return buffer

